"""
Watch Chat - Source Package

A compact Gemini chat client for tiny screens, with a streaming-safe
Markdown/LaTeX content parser.
"""

__version__ = "1.0.0"
__author__ = "Watch Chat Team"
