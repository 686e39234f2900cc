"""Clients for Slack webhooks, PagerDuty events and Ethereum JSON-RPC nodes."""