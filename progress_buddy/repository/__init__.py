"""Repository layer: SQL for activities, logs and goals.

Functions take a Store and go through its get/all/run primitives, so
services and routes never hold SQL strings.
"""
from __future__ import annotations
