"""VW-AUDIT Web API"""
