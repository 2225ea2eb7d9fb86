"""
Flashdeck core package.

Turns a single markdown-like document of interview questions into a
navigable study deck. It exposes the document parser, a substring search
index, a progress store persisted through a pluggable key-value port, and a
thin study session coordinator that ties them together.
"""
