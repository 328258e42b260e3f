"""
Document Summarizer Backend Application.

A FastAPI service that extracts text from uploaded PDF, DOCX and plain-text
documents and produces structured summaries with an LLM.
"""

__version__ = "1.0.0"
