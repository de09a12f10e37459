"""Request Throttling and Dispatch.

Contains the fixed-window rate gate and the asynchronous dispatcher.
"""
