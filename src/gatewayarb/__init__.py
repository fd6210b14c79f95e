"""
Circular Swap Arbitrage Engine.

An asynchronous bot that scans closed token-swap chains on the Jupiter quote
service and lands profitable swaps by racing them across several delivery
paths of the Sanctum relay gateway.
"""

__version__ = "1.0.0"
__author__ = "Tim"
