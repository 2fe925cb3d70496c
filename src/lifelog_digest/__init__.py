"""
Lifelog Digest: daily lifelog summaries and action items.

Pipeline: Limitless API -> summary + action items -> SQLite (+ Kanban board)
"""
