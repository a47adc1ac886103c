import logging
import os
import sys
from types import MappingProxyType

import click
from flask import Flask
from config     import Config
from extensions import db, migrate

from actions       import PER_PAGE
from actions.front import front_bp, APP_SCOPE_KEY
from models        import AdminFlag, Employee, hash_password


def create_app(config=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config)

    # ── logging ──
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # ── 初始化 ORM / Migrate ──
    db.init_app(app)
    migrate.init_app(app, db)

    # ── application scope：啟動時建立，之後唯讀 ──
    app.extensions[APP_SCOPE_KEY] = MappingProxyType({
        PER_PAGE.name: app.config["PER_PAGE"],
    })

    # ── 註冊 front controller ──
    app.register_blueprint(front_bp)

    # ── 建立第一位管理者：flask --app app create-admin CODE NAME PASSWORD ──
    @app.cli.command("create-admin")
    @click.argument("code")
    @click.argument("name")
    @click.argument("password")
    def create_admin(code, name, password):
        if Employee.count_registered_by_code(code) > 0:
            raise click.ClickException(f"code {code} already exists")
        emp = Employee(code=code, name=name, admin_flag=AdminFlag.ADMIN,
                       password=hash_password(password))
        db.session.add(emp)
        db.session.commit()
        click.echo(f"admin {code} created (id={emp.id})")

    # ── ★ 第一次啟動自動建立所有資料表 ──
    with app.app_context():
        db.create_all()          # 如果已存在資料表則忽略，不會覆寫

    logging.getLogger(__name__).info("employee admin initialized")
    return app


# ────────────────────────── 本機 / 雲端啟動點 ──────────────────────────
if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    # 正式環境建議把 debug 關掉，以免洩漏 Stack Trace
    create_app().run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG") == "1")
