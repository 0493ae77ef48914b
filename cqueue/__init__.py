"""
In-Memory Job Queue

A single-process job queue service: producers submit jobs, consumers pull
them in arrival order and report completion or cancellation over HTTP.
"""

__version__ = "1.0.0"
