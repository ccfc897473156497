"""Routing — endpoint templates, typed matching and the error cascade.

Resources and error resources are registered during setup; a Router then
dispatches its one request and always produces a response.
"""
