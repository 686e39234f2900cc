"""Shared helpers: wei conversion, address parsing and the dead letter queue."""