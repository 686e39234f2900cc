"""HTTP API: models, service, WSGI handlers, logging middleware and server."""