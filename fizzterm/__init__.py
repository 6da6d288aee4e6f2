"""Render Fizzy card markup as styled terminal text using the terminal's palette."""
