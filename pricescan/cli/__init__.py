"""Command-line interface for pricescan.

Usage:
    pricescan scan <image>
    pricescan scan <image> --json
    pricescan batch <image> [<image> ...]
    pricescan long <section-1> <section-2> [...]
"""
