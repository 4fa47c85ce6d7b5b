"""
Personalization engine: namespaced TTL/LRU caching, engagement metrics,
trending analysis and weighted match scoring for jobs and content.

Entry point is ``personalization.app_context.AppContext.build(config)``.
"""
