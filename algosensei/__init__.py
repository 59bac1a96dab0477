"""
AlgoSensei - algorithm tutoring backend
"""

__version__ = "0.1.0"
