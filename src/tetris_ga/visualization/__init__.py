"""Pygame front ends: session renderer, live evolution view and human play."""
