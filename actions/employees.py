# actions/employees.py
# -*- coding: utf-8 -*-
"""
員工管理（僅限管理者）
  index / new / create / show / edit / update / destroy / upload
"""
import logging
from datetime import datetime

import pandas as pd

from extensions import db
from models import AdminFlag, Employee, hash_password
from . import (ACT_EMP, EMP_ADMIN, EMP_CODE, EMP_COUNT, EMP_ID, EMP_NAME,
               EMP_PASS, EMPLOYEE, EMPLOYEES, ERR, FLUSH, FW_EMP_EDIT, FW_EMP_INDEX,
               FW_EMP_NEW, FW_EMP_SHOW, FW_EMP_UPLOAD, FW_ERR_UNKNOWN,
               MAX_ROW, MSG_DELETED, MSG_REGISTERED, MSG_UPDATED, PAGE,
               PER_PAGE, RESULTS, to_number)
from .base import ActionBase, command

logger = logging.getLogger(__name__)

UPLOAD_COLUMNS = {"code", "name", "password", "admin_flag"}


# ────────────────────────── 輸入檢查 ──────────────────────────
def validate(code, name, password, admin_flag, *, check_code=True, check_password=True):
    """回傳錯誤訊息 list；空 list 表示通過"""
    errors = []
    if check_code:
        if not code:
            errors.append("請輸入員工代碼。")
        elif Employee.count_registered_by_code(code) > 0:
            errors.append("此員工代碼已存在。")
    if not name:
        errors.append("請輸入姓名。")
    if check_password and not password:
        errors.append("請輸入密碼。")
    if admin_flag not in (AdminFlag.GENERAL, AdminFlag.ADMIN):
        errors.append("權限值不正確。")
    return errors


class EmployeeAction(ActionBase):

    def process(self):
        emp = self.get_login_employee()
        if emp is None or not emp.is_admin:
            logger.warning("non-admin access to %s", ACT_EMP)
            return self.forward(FW_ERR_UNKNOWN)
        return self.invoke()

    # ────────────────────────── 共用 ──────────────────────────
    def _find_active(self):
        eid = to_number(self.get_request_param(EMP_ID))
        if eid is None:
            return None
        emp = db.session.get(Employee, eid)
        if emp is None or emp.is_deleted:
            return None
        return emp

    def _form_values(self):
        code = (self.get_request_param(EMP_CODE) or "").strip()
        name = (self.get_request_param(EMP_NAME) or "").strip()
        password = self.get_request_param(EMP_PASS) or ""
        admin_flag = to_number(self.get_request_param(EMP_ADMIN))
        if admin_flag is None:
            admin_flag = AdminFlag.GENERAL
        return code, name, password, admin_flag

    # ────────────────────────── 一覽 ──────────────────────────
    @command()
    def index(self):
        page = self.get_page()
        per_page = self.get_context_scope(PER_PAGE)
        self.put_request_scope(EMPLOYEES, Employee.get_all(page, per_page))
        self.put_request_scope(EMP_COUNT, Employee.count_all())
        self.put_request_scope(PAGE, page)
        self.put_request_scope(MAX_ROW, per_page)
        self.move_flush()
        return self.forward(FW_EMP_INDEX)

    # ────────────────────────── 新增 ──────────────────────────
    @command()
    def new(self):
        self.put_request_scope(EMPLOYEE, None)
        return self.forward(FW_EMP_NEW)

    @command()
    def create(self):
        if not self.check_token():
            return self.response

        code, name, password, admin_flag = self._form_values()
        errors = validate(code, name, password, admin_flag)
        if errors:
            self.put_request_scope(EMPLOYEE, {"code": code, "name": name, "admin_flag": admin_flag})
            self.put_request_scope(ERR, errors)
            return self.forward(FW_EMP_NEW)

        now = datetime.now()
        db.session.add(Employee(
            code=code,
            name=name,
            password=hash_password(password),
            admin_flag=admin_flag,
            created_at=now,
            updated_at=now,
        ))
        db.session.commit()
        logger.info("employee %s registered", code)
        self.put_session_scope(FLUSH, MSG_REGISTERED)
        return self.redirect(ACT_EMP, "index")

    # ────────────────────────── 詳細 / 編輯 ──────────────────────────
    @command()
    def show(self):
        emp = self._find_active()
        if emp is None:
            return self.forward(FW_ERR_UNKNOWN)
        self.put_request_scope(EMPLOYEE, emp)
        return self.forward(FW_EMP_SHOW)

    @command()
    def edit(self):
        emp = self._find_active()
        if emp is None:
            return self.forward(FW_ERR_UNKNOWN)
        self.put_request_scope(EMPLOYEE, emp)
        return self.forward(FW_EMP_EDIT)

    @command()
    def update(self):
        if not self.check_token():
            return self.response

        emp = self._find_active()
        if emp is None:
            return self.forward(FW_ERR_UNKNOWN)

        code, name, password, admin_flag = self._form_values()
        errors = validate(code, name, password, admin_flag,
                          check_code=(code != emp.code), check_password=False)
        if errors:
            self.put_request_scope(EMPLOYEE, emp)
            self.put_request_scope(ERR, errors)
            return self.forward(FW_EMP_EDIT)

        emp.code = code
        emp.name = name
        emp.admin_flag = admin_flag
        if password:  # 空白表示沿用舊密碼
            emp.password = hash_password(password)
        emp.touch()
        db.session.commit()
        logger.info("employee %s updated", emp.code)
        self.put_session_scope(FLUSH, MSG_UPDATED)
        return self.redirect(ACT_EMP, "index")

    # ────────────────────────── 刪除（軟刪除） ──────────────────────────
    @command()
    def destroy(self):
        if not self.check_token():
            return self.response

        emp = self._find_active()
        if emp is None:
            return self.forward(FW_ERR_UNKNOWN)
        emp.mark_deleted()
        db.session.commit()
        logger.info("employee %s deleted", emp.code)
        self.put_session_scope(FLUSH, MSG_DELETED)
        return self.redirect(ACT_EMP, "index")

    # ────────────────────────── 批次匯入 ──────────────────────────
    @command()
    def upload(self):
        if self.request.method != "POST":
            return self.forward(FW_EMP_UPLOAD)

        if not self.check_token():
            return self.response

        file = self.request.files.get("file")
        if not file or file.filename == "":
            self.put_request_scope(ERR, ["請選擇檔案。"])
            return self.forward(FW_EMP_UPLOAD)

        try:
            df = read_table(file)
        except Exception as e:
            logger.warning("upload read failed: %s", e)
            self.put_request_scope(ERR, [f"讀取檔案失敗：{e}"])
            return self.forward(FW_EMP_UPLOAD)

        if not UPLOAD_COLUMNS.issubset(df.columns):
            self.put_request_scope(ERR, ["檔案欄位必須包含 code, name, password, admin_flag"])
            return self.forward(FW_EMP_UPLOAD)

        results = import_rows(df)
        self.put_request_scope(RESULTS, results)
        return self.forward(FW_EMP_UPLOAD)


def read_table(file):
    """CSV 或 Excel，全部欄位以字串讀入"""
    if file.filename.lower().endswith(".csv"):
        df = pd.read_csv(file, dtype=str)
    else:
        df = pd.read_excel(file, dtype=str)
    return df.fillna("")


def import_rows(df):
    """逐列新增；回傳 [(code, 結果)]"""
    results = []
    seen = set()
    now = datetime.now()
    for _, row in df.iterrows():
        code = str(row["code"]).strip()
        name = str(row["name"]).strip()
        password = str(row["password"])
        admin_flag = to_number(str(row["admin_flag"]).strip() or "0")

        if code in seen:
            results.append((code, "檔案內重複"))
            continue
        errors = validate(code, name, password, admin_flag)
        if errors:
            results.append((code, " ".join(errors)))
            continue

        db.session.add(Employee(
            code=code,
            name=name,
            password=hash_password(password),
            admin_flag=admin_flag,
            created_at=now,
            updated_at=now,
        ))
        seen.add(code)
        results.append((code, "ok"))
    db.session.commit()
    logger.info("imported %d employees", sum(1 for _, r in results if r == "ok"))
    return results
