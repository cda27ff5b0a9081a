"""VW-AUDIT API Routes"""
