"""
Solver module for position compression.

This module provides the ILP solver wrapper that takes the compression
model and decodes its solution into the compressed position.
"""
