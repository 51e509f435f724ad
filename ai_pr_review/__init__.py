"""
AI PR Review.

Fetches a GitHub pull request, asks an OpenAI model to review its diff, and
renders the structured result to the console, a file, or back onto the PR.
"""

__version__ = "1.0.0"
