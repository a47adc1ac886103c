# models.py
import enum
from datetime import datetime

from passlib.context import CryptContext

from extensions import db

# bcrypt：每筆自帶 salt，雜湊長度 60 字元
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AdminFlag(enum.IntEnum):
    GENERAL = 0
    ADMIN   = 1


class DeleteFlag(enum.IntEnum):
    ACTIVE  = 0
    DELETED = 1


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


class Employee(db.Model):
    __tablename__ = 'employees'
    id          = db.Column(db.Integer, primary_key=True, autoincrement=True)
    code        = db.Column(db.String(50), nullable=False, unique=True)   # 社員編號（含已刪除者皆不可重複）
    name        = db.Column(db.String(50), nullable=False)
    password    = db.Column(db.String(64), nullable=False)
    admin_flag  = db.Column(db.Integer, nullable=False, default=AdminFlag.GENERAL)
    created_at  = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at  = db.Column(db.DateTime, nullable=False, default=datetime.now)
    delete_flag = db.Column(db.Integer, nullable=False, default=DeleteFlag.ACTIVE)

    # ────────────────────────── 狀態 ──────────────────────────
    @property
    def is_admin(self) -> bool:
        return self.admin_flag == AdminFlag.ADMIN

    @property
    def is_deleted(self) -> bool:
        return self.delete_flag == DeleteFlag.DELETED

    def touch(self, now=None):
        self.updated_at = now or datetime.now()

    def mark_deleted(self, now=None):
        """軟刪除：只改旗標，不刪除資料列"""
        self.delete_flag = DeleteFlag.DELETED
        self.touch(now)

    # ────────────────────────── 具名查詢 ──────────────────────────
    @classmethod
    def get_all(cls, page=None, per_page=15, include_deleted=False):
        """依 id 由大到小；page 為 1 起算，None 表示全部"""
        q = cls.query
        if not include_deleted:
            q = q.filter(cls.delete_flag == DeleteFlag.ACTIVE)
        q = q.order_by(cls.id.desc())
        if page is not None:
            q = q.offset(per_page * (page - 1)).limit(per_page)
        return q.all()

    @classmethod
    def count_all(cls, include_deleted=False) -> int:
        q = cls.query
        if not include_deleted:
            q = q.filter(cls.delete_flag == DeleteFlag.ACTIVE)
        return q.count()

    @classmethod
    def count_registered_by_code(cls, code: str) -> int:
        return cls.query.filter_by(code=code).count()

    @classmethod
    def get_by_code_and_pass(cls, code: str, password: str):
        """password 為明文，與儲存的雜湊比對；已刪除者一律查無"""
        emp = cls.query.filter_by(code=code, delete_flag=DeleteFlag.ACTIVE).first()
        if emp is None or not verify_password(password, emp.password):
            return None
        return emp
