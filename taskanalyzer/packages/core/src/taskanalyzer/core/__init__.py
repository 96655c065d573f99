"""Task Analyzer Core -- 本地任务存储 + 匿名身份"""
