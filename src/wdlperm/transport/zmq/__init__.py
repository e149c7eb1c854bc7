"""ZeroMQ channel bridge."""

from .bridge import Bridge, zmq_context
