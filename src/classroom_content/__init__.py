"""
Classroom content service: parse, merge and serve learning content.
"""
