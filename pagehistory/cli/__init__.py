"""
pagehistory CLI - browse the past states of a page

Commands:
- pagehistory replay - Reconstruct every snapshot and summarize them
- pagehistory show - Print the page text at one point in time
- pagehistory history - Per-line history from a commit log
- pagehistory version - Show version information
"""
