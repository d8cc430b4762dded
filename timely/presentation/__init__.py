"""
Kivy presentation layer for Timely application.
"""
