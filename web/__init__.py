"""Web surface over the personalization engine."""
