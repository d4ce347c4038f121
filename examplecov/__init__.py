"""
examplecov - Coverage reports for example conversion.

Summarizes how many documentation examples were converted into each
target language, and why conversions failed.

Usage:
    examplecov export <record>     # Write all coverage reports
    examplecov summary <record>    # Print the short success digest
    examplecov init-config         # Write a sample export configuration
"""

__version__ = "0.1.0"
