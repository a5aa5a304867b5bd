"""
Core cross-cutting pieces shared by the client, steps and CLI.
"""
