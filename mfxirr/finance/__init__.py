"""Cash flows and the XIRR solver."""
