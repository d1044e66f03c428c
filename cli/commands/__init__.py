"""
Command groups for the sati CLI.
"""
