# -*- coding: utf-8 -*-
"""
Front controller：所有請求都進到 "/"，依 ?action= 選出 Action 類別
"""
import logging

from flask import Blueprint, current_app, redirect, request, session

from . import ACT_AUTH, ACT_EMP, ACT_TOP, FW_ERR_UNKNOWN, LOGIN_EMP, action_url
from .auth import AuthAction
from .base import ActionBase
from .employees import EmployeeAction
from .top import TopAction

logger = logging.getLogger(__name__)

front_bp = Blueprint("front", __name__)

APP_SCOPE_KEY = "application_scope"


class UnknownAction(ActionBase):
    """action 參數不正確時使用"""

    def process(self):
        return self.forward(FW_ERR_UNKNOWN)


ACTIONS = {
    ACT_TOP:  TopAction,
    ACT_EMP:  EmployeeAction,
    ACT_AUTH: AuthAction,
}


def resolve_action(name):
    cls = ACTIONS.get(name)
    if cls is None:
        logger.warning("unknown action %r", name)
        return UnknownAction
    return cls


def _redirect_to(action, cmd):
    return redirect(action_url(request.script_root, action, cmd))


@front_bp.before_request
def require_login():
    """未登入者只能使用 Auth，其餘一律導向登入畫面"""
    if request.values.get("action") == ACT_AUTH:
        return None
    if session.get(LOGIN_EMP.name) is None:
        return _redirect_to(ACT_AUTH, "show_login")
    return None


@front_bp.route("/", methods=["GET", "POST"])
def dispatch():
    name = request.values.get("action")
    if name is None:
        return _redirect_to(ACT_TOP, "index")

    action = resolve_action(name)()
    action.init(current_app.extensions[APP_SCOPE_KEY], request, session)
    return action.process()
