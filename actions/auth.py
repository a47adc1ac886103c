import logging

from models import Employee
from . import (ACT_AUTH, ACT_TOP, EMP_CODE, EMP_PASS, FLUSH, FW_LOGIN,
               LOGIN_EMP, LOGIN_ERR, MSG_LOGINED, MSG_LOGOUT)
from .base import ActionBase, command

logger = logging.getLogger(__name__)


class AuthAction(ActionBase):

    def process(self):
        return self.invoke()

    @command()
    def show_login(self):
        self.move_flush()
        return self.forward(FW_LOGIN)

    @command()
    def login(self):
        code = (self.get_request_param(EMP_CODE) or "").strip()
        plain = self.get_request_param(EMP_PASS) or ""

        if not self.check_token():
            return self.response

        emp = authenticate(code, plain)
        if emp is None:
            logger.info("login failed for code %r", code)
            self.put_request_scope(LOGIN_ERR, True)
            self.put_request_scope(EMP_CODE, code)
            return self.forward(FW_LOGIN)

        self.put_session_scope(LOGIN_EMP, emp.id)
        self.put_session_scope(FLUSH, MSG_LOGINED)
        return self.redirect(ACT_TOP, "index")

    @command()
    def logout(self):
        if not self.check_token():
            return self.response

        self.remove_session_scope(LOGIN_EMP)
        self.put_session_scope(FLUSH, MSG_LOGOUT)
        return self.redirect(ACT_AUTH, "show_login")


def authenticate(code, plain):
    """代碼與密碼皆正確且未刪除的員工，否則 None"""
    if not code or not plain:
        return None
    return Employee.get_by_code_and_pass(code, plain)
