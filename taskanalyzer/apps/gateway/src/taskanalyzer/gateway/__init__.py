"""Task Analyzer Gateway -- 本地任务存储的 HTTP 调度层"""
