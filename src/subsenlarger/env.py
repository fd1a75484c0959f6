from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_dotenv_if_present(env_path: Optional[str | Path] = None) -> bool:
    """
    从项目根目录加载 .env 文件（如果存在）。

    默认查找路径为 src/subsenlarger/ 之上的仓库根目录下的 .env；
    已存在的环境变量不会被覆盖。返回是否加载了文件。
    """
    if env_path is None:
        root = Path(__file__).resolve().parents[2]
        env_file = root / ".env"
    else:
        env_file = Path(env_path)

    if not env_file.is_file():
        return False
    return load_dotenv(dotenv_path=env_file, override=False)
