"""VW-AUDIT Command-Line Interface"""
