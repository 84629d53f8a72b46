"""
CareerCraft AI
A job-board REST API with AI-assisted career tools.

Architecture:
- MongoDB: users, jobs, applications, mock tests, test attempts
- OpenAI-compatible AI endpoint: resume review, MCQ generation, career roadmaps
- S3-compatible storage (or local disk): resume files
"""

__version__ = "1.0.0"
