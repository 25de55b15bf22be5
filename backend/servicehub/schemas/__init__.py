# Request/response schemas (camelCase on the wire)
