"""
NFT 收藏品投资追踪配置文件
"""

import os

# Blockspan API 配置
BLOCKSPAN_BASE_URL = "https://api.blockspan.com"

# API 密钥（从环境变量读取）
BLOCKSPAN_API_KEY = os.environ.get("BLOCKSPAN_API_KEY", "")

# 请求超时
REQUEST_TIMEOUT = 30

# 代理配置（如需要代理，设置为 {"http": "http://127.0.0.1:7890", "https": "http://127.0.0.1:7890"}）
PROXIES = None

# 并发请求数（当前与往期快照各一个）
MAX_WORKERS = 2
