# account_admin/core/config.py
from dotenv import load_dotenv
load_dotenv(".env")
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, computed_field
from typing import Optional, Literal

class Settings(BaseSettings):
    # model_config 会自动加载 .env 文件
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    APP_ENV: str = "production"
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "account_admin"

    @computed_field
    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # --- Resource Storage ---
    # 资源中心是否启用。关闭时账户/租户操作只修改元数据，不触碰远程存储
    RESOURCE_UPLOAD_ENABLED: bool = False

    STORAGE_PROVIDER: Literal["local", "aliyun_oss"] = "local"

    # 所有租户命名空间的根路径: {STORAGE_BASE_PATH}/{tenant_code}/...
    STORAGE_BASE_PATH: str = Field("/scheduler", description="Root path of every tenant namespace")

    # local provider 在本机文件系统上的挂载目录
    STORAGE_LOCAL_ROOT: str = "./storage"

    # Aliyun OSS credentials (only required when STORAGE_PROVIDER == 'aliyun_oss')
    STORAGE_ENDPOINT: Optional[str] = Field(None, description="e.g., oss-cn-hangzhou.aliyuncs.com")
    STORAGE_BUCKET: Optional[str] = None
    STORAGE_ACCESS_KEY: Optional[str] = None
    STORAGE_SECRET_KEY: Optional[str] = None

    # 自助注册账户默认归属的租户
    DEFAULT_TENANT_ID: int = 1

settings = Settings()
