"""
模块名称：全局常量

本模块集中存放进程级常量，主要用于日志与配置模块在导入期读取开发模式开关。
注意事项：`DEV` 在导入时从环境变量读取一次，之后不随环境变化。
"""

import os

ENV_PREFIX = "SPROUT_"
"""环境变量前缀，与 `Settings.model_config.env_prefix` 保持一致。"""

DEV = os.getenv(f"{ENV_PREFIX}DEV", "false").lower() == "true"
"""是否以开发模式运行（记录调用位置、保留异常详情）。"""
