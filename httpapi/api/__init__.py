"""FastAPI front end that serves operation servers over HTTP locally.

It stands in for the API gateway: requests are translated into gateway
events and the servers' wire results back into HTTP responses.
"""
