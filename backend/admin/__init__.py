"""
Admin layer: builds notice contexts from settings, runtime parameters
and inbound requests, and serves them over HTTP and the command line.
"""
