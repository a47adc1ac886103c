# -*- coding: utf-8 -*-
"""
各 Action 的共用父類別

  ‑ init()     : 綁定 application scope / request / session
  ‑ invoke()   : 依參數 command 執行「已登錄」的指令；未登錄一律顯示錯誤頁
  ‑ forward()  : 以 request scope 的內容渲染 templates/<view>.html
  ‑ redirect() : 導向 <root>/?action=...&command=...
  ‑ check_token() : CSRF 檢查（session 內的隨機 token，固定時間比較）
"""
import hmac
import logging
import secrets
from typing import Callable, Dict, Optional

from flask import render_template, redirect as http_redirect

from extensions import db
from models import Employee
from . import (COMMAND, CSRF_TOKEN, FLUSH, FW_ERR_UNKNOWN, LOGIN_EMP, PAGE,
               TOKEN, ScopeKey, T, action_url, to_number)

logger = logging.getLogger(__name__)


def command(name: Optional[str] = None):
    """把方法登錄成可由 ?command=<name> 呼叫的指令"""

    def deco(fn):
        fn._command_name = name or fn.__name__
        return fn

    return deco


class ActionBase:
    #: 指令名稱 → 函式，由 __init_subclass__ 收集
    commands: Dict[str, Callable] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        names = {}
        for klass in reversed(cls.__mro__):
            for attr, fn in vars(klass).items():
                cmd = getattr(fn, "_command_name", None)
                if cmd:
                    names[cmd] = attr
        # 依屬性名稱取值，子類別覆寫（即使沒有再加 @command）也會生效
        cls.commands = {cmd: getattr(cls, attr) for cmd, attr in names.items()}

    def init(self, context, request, session):
        """
        context : application scope（唯讀 mapping，啟動時建立）
        request : 本次請求
        session : 本 client 的 session mapping
        """
        self.context = context
        self.request = request
        self.session = session
        self.request_scope = {}
        self.response = None

    def process(self):
        """由 front controller 呼叫；子類別實作"""
        raise NotImplementedError

    # ────────────────────────── 指令分派 ──────────────────────────
    def invoke(self):
        cmd = self.get_request_param(COMMAND)
        handler = self.commands.get(cmd)
        if handler is None:
            logger.warning("unknown command %r for %s", cmd, type(self).__name__)
            return self.forward(FW_ERR_UNKNOWN)

        try:
            result = handler(self)
        except Exception:
            logger.exception("command %r of %s failed", cmd, type(self).__name__)
            db.session.rollback()
            return self.forward(FW_ERR_UNKNOWN)
        return result if result is not None else self.response

    # ────────────────────────── 畫面轉移 ──────────────────────────
    def forward(self, view: str):
        ctx = dict(self.request_scope)
        ctx.setdefault(TOKEN.name, self.get_token_id())
        ctx.setdefault("login_employee", self.get_login_employee())
        self.response = render_template(f"{view}.html", **ctx)
        return self.response

    def redirect(self, action: str, cmd: Optional[str] = None):
        self.response = http_redirect(action_url(self.request.script_root, action, cmd))
        return self.response

    # ────────────────────────── CSRF ──────────────────────────
    def get_token_id(self) -> str:
        """session 專用的防偽 token；第一次取用時產生"""
        tok = self.session.get(CSRF_TOKEN.name)
        if not tok:
            tok = secrets.token_urlsafe(32)
            self.session[CSRF_TOKEN.name] = tok
        return tok

    def check_token(self) -> bool:
        """token 不符時顯示錯誤頁並回傳 False"""
        submitted = self.get_request_param(TOKEN) or ""
        expected = self.session.get(CSRF_TOKEN.name) or ""
        if submitted and expected and hmac.compare_digest(submitted, expected):
            return True
        logger.warning("token mismatch on %s %s", type(self).__name__, self.request.path)
        self.forward(FW_ERR_UNKNOWN)
        return False

    # ────────────────────────── 參數 ──────────────────────────
    def get_page(self) -> int:
        page = to_number(self.get_request_param(PAGE))
        return 1 if page is None or page < 1 else page

    def get_request_param(self, key: ScopeKey) -> Optional[str]:
        return self.request.values.get(key.name)

    # ────────────────────────── 範圍存取 ──────────────────────────
    def put_request_scope(self, key: ScopeKey[T], value: T):
        self.request_scope[key.name] = value

    def get_request_scope(self, key: ScopeKey[T]) -> Optional[T]:
        return self.request_scope.get(key.name)

    def get_session_scope(self, key: ScopeKey[T]) -> Optional[T]:
        return self.session.get(key.name)

    def put_session_scope(self, key: ScopeKey[T], value: T):
        self.session[key.name] = value

    def remove_session_scope(self, key: ScopeKey):
        self.session.pop(key.name, None)

    def get_context_scope(self, key: ScopeKey[T]) -> Optional[T]:
        return self.context.get(key.name)

    def move_flush(self):
        """session 內的提示訊息搬到 request scope（只顯示一次）"""
        flush = self.get_session_scope(FLUSH)
        if flush:
            self.put_request_scope(FLUSH, flush)
            self.remove_session_scope(FLUSH)

    def get_login_employee(self) -> Optional[Employee]:
        eid = self.get_session_scope(LOGIN_EMP)
        if eid is None:
            return None
        emp = db.session.get(Employee, eid)
        if emp is None or emp.is_deleted:
            return None
        return emp
