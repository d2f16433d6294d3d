"""JSON routers exposing the account service over HTTP."""
