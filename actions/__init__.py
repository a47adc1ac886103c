"""
共用設定與工具函式
"""
import re
from datetime import date, datetime
from typing import Generic, Optional, Type, TypeVar
from urllib.parse import urlencode

T = TypeVar("T")


# ────────────────────────── 範圍鍵 ──────────────────────────
class ScopeKey(Generic[T]):
    """
    request / session / application 三個範圍共用的鍵。
    每個鍵在宣告時就帶著值的型別；取值時不做檢查，
    存放錯誤型別的值屬於呼叫端的程式錯誤。
    """

    def __init__(self, name: str, type_: Type[T]):
        self.name = name
        self.type = type_

    def __repr__(self):
        return f"ScopeKey({self.name!r}, {self.type.__name__})"


# request 參數 / request scope
ACTION     = ScopeKey("action", str)
COMMAND    = ScopeKey("command", str)
TOKEN      = ScopeKey("token", str)
PAGE       = ScopeKey("page", int)
MAX_ROW    = ScopeKey("maxRow", int)
ERR        = ScopeKey("errors", list)
LOGIN_ERR  = ScopeKey("loginError", bool)
RESULTS    = ScopeKey("results", list)

EMPLOYEE   = ScopeKey("employee", object)
EMPLOYEES  = ScopeKey("employees", list)
EMP_COUNT  = ScopeKey("employees_count", int)
EMP_ID     = ScopeKey("id", int)
EMP_CODE   = ScopeKey("code", str)
EMP_NAME   = ScopeKey("name", str)
EMP_PASS   = ScopeKey("password", str)
EMP_ADMIN  = ScopeKey("admin_flag", int)

# session scope
LOGIN_EMP  = ScopeKey("login_employee_id", int)
FLUSH      = ScopeKey("flush", str)
CSRF_TOKEN = ScopeKey("_csrf_token", str)

# application scope
PER_PAGE   = ScopeKey("PER_PAGE", int)


# ────────────────────────── 畫面 / 動作名稱 ──────────────────────────
ACT_TOP  = "Top"
ACT_EMP  = "Employee"
ACT_AUTH = "Auth"

FW_ERR_UNKNOWN = "error/unknown"
FW_TOP_INDEX   = "topPage/index"
FW_LOGIN       = "login/login"
FW_EMP_INDEX   = "employees/index"
FW_EMP_NEW     = "employees/new"
FW_EMP_SHOW    = "employees/show"
FW_EMP_EDIT    = "employees/edit"
FW_EMP_UPLOAD  = "employees/upload"

# 訊息
MSG_LOGINED    = "登入成功。"
MSG_LOGOUT     = "已登出。"
MSG_REGISTERED = "新增完成。"
MSG_UPDATED    = "更新完成。"
MSG_DELETED    = "刪除完成。"

DATE_FORMAT = "%Y-%m-%d"

# 與 32 位元整數相同的範圍
INT_MIN, INT_MAX = -2 ** 31, 2 ** 31 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")


# ────────────────────────── 參數轉換 ──────────────────────────
def to_number(str_number) -> Optional[int]:
    """
    字串轉整數；無法轉換時回傳 None（呼叫端自行判斷）
      ‑ 只接受 [+-] 加上數字，不接受空白、底線、小數
      ‑ 超出 32 位元範圍也視為無法轉換
    """
    if not isinstance(str_number, str) or not _INT_RE.fullmatch(str_number):
        return None
    try:
        number = int(str_number)
    except ValueError:  # 位數過多
        return None
    if not INT_MIN <= number <= INT_MAX:
        return None
    return number


def action_url(root: str, action: str, cmd: Optional[str] = None) -> str:
    """<root>/?action=<action>[&command=<command>]"""
    params = {"action": action}
    if cmd is not None:
        params["command"] = cmd
    return f"{root}/?{urlencode(params)}"


def to_local_date(str_date) -> date:
    """
    字串轉 date：
      ‑ None 或空字串 → 今天（依呼叫當下的系統日期）
      ‑ 其餘依 YYYY-MM-DD 解析，格式錯誤時拋出 ValueError
    """
    if not str_date:
        return date.today()
    return datetime.strptime(str_date, DATE_FORMAT).date()
