"""
hostel-meals 后端服务
餐品目录、点赞与评价、会员餐品申请以及管理看板
"""

__version__ = "1.0.0"
