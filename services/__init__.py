"""
服务模块
"""
