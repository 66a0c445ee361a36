"""Addressing, messages, column batches, path EOS tracking, task queues, promise pools and option parsing for sharded actor runtimes."""

__version__ = "0.1.0"