"""Employee administration commands."""
import io

from extensions import db
from models import Employee, verify_password


def _get(code):
    db.session.expire_all()
    return Employee.query.filter_by(code=code).first()


def test_non_admin_is_refused(client, make_employee, login):
    make_employee(code="E001", password="secret")
    login("E001", "secret")
    resp = client.get("/?action=Employee&command=index")
    assert "發生錯誤" in resp.get_data(as_text=True)


def test_index_lists_active_employees_paged(admin_client, make_employee):
    client, _ = admin_client
    for i in range(4):
        make_employee(code=f"E{i:03d}", name=f"N{i}")
    make_employee(code="GONE", deleted=True)

    text = client.get("/?action=Employee&command=index").get_data(as_text=True)
    # 5 active employees (admin included), 3 per page, newest first
    assert "共 5 筆" in text
    assert "E003" in text and "E002" in text and "E001" in text
    assert "E000" not in text
    assert "GONE" not in text

    text = client.get("/?action=Employee&command=index&page=2").get_data(as_text=True)
    assert "E000" in text and "A001" in text


def test_create(admin_client, app):
    client, token = admin_client
    resp = client.post("/?action=Employee&command=create", data={
        "code": "E100", "name": "Bob", "password": "pw", "admin_flag": "0", "token": token,
    })
    assert resp.location.endswith("/?action=Employee&command=index")
    emp = _get("E100")
    assert emp.name == "Bob"
    assert verify_password("pw", emp.password)
    assert emp.created_at == emp.updated_at
    assert "新增完成。" in client.get(resp.location).get_data(as_text=True)


def test_create_validation_errors(admin_client, make_employee):
    client, token = admin_client
    make_employee(code="DUP", deleted=True)
    resp = client.post("/?action=Employee&command=create", data={
        "code": "DUP", "name": "", "password": "", "token": token,
    })
    text = resp.get_data(as_text=True)
    assert "此員工代碼已存在。" in text
    assert "請輸入姓名。" in text
    assert "請輸入密碼。" in text
    assert Employee.count_registered_by_code("DUP") == 1


def test_create_bad_token(admin_client):
    client, _ = admin_client
    resp = client.post("/?action=Employee&command=create", data={
        "code": "E100", "name": "Bob", "password": "pw", "token": "bad",
    })
    assert "發生錯誤" in resp.get_data(as_text=True)
    assert _get("E100") is None


def test_show_and_edit(admin_client, make_employee):
    client, _ = admin_client
    emp = make_employee(code="E001", name="Alice")
    assert "Alice" in client.get(f"/?action=Employee&command=show&id={emp.id}").get_data(as_text=True)
    assert 'value="E001"' in client.get(f"/?action=Employee&command=edit&id={emp.id}").get_data(as_text=True)


def test_show_missing_or_deleted(admin_client, make_employee):
    client, _ = admin_client
    gone = make_employee(code="GONE", deleted=True)
    for eid in ("999", "abc", str(gone.id)):
        text = client.get(f"/?action=Employee&command=show&id={eid}").get_data(as_text=True)
        assert "發生錯誤" in text


def test_update_keeps_password_when_blank(admin_client, make_employee, app):
    client, token = admin_client
    emp = make_employee(code="E001", name="Alice", password="secret")
    eid, created = emp.id, emp.created_at
    resp = client.post("/?action=Employee&command=update", data={
        "id": str(eid), "code": "E001", "name": "Alicia", "password": "", "admin_flag": "1", "token": token,
    })
    assert resp.status_code == 302
    emp = _get("E001")
    assert emp.name == "Alicia"
    assert emp.is_admin
    assert verify_password("secret", emp.password)
    assert emp.created_at == created
    assert emp.updated_at >= created


def test_update_code_must_stay_unique(admin_client, make_employee):
    client, token = admin_client
    make_employee(code="E001")
    other = make_employee(code="E002")
    resp = client.post("/?action=Employee&command=update", data={
        "id": str(other.id), "code": "E001", "name": "X", "token": token,
    })
    assert "此員工代碼已存在。" in resp.get_data(as_text=True)
    assert _get("E002") is not None


def test_destroy_is_soft(admin_client, make_employee):
    client, token = admin_client
    emp = make_employee(code="E001")
    resp = client.post("/?action=Employee&command=destroy", data={"id": str(emp.id), "token": token})
    assert resp.location.endswith("/?action=Employee&command=index")
    emp = _get("E001")
    assert emp is not None
    assert emp.is_deleted


def test_destroy_without_token(admin_client, make_employee):
    client, _ = admin_client
    emp = make_employee(code="E001")
    client.post("/?action=Employee&command=destroy", data={"id": str(emp.id)})
    assert not _get("E001").is_deleted


def test_upload_csv(admin_client, make_employee):
    client, token = admin_client
    make_employee(code="E001")
    csv = (
        "code,name,password,admin_flag\n"
        "E001,Dup,pw,0\n"
        "E002,Bob,pw,1\n"
        "E002,Bob2,pw,0\n"
        "E003,,pw,0\n"
        "E004,Carol,pw,\n"
    )
    resp = client.post(
        "/?action=Employee&command=upload",
        data={"token": token, "file": (io.BytesIO(csv.encode("utf-8")), "emps.csv")},
        content_type="multipart/form-data",
    )
    text = resp.get_data(as_text=True)
    assert "此員工代碼已存在。" in text
    assert "檔案內重複" in text
    assert "請輸入姓名。" in text
    assert _get("E002").is_admin
    assert not _get("E004").is_admin
    assert _get("E003") is None


def test_upload_missing_columns(admin_client):
    client, token = admin_client
    resp = client.post(
        "/?action=Employee&command=upload",
        data={"token": token, "file": (io.BytesIO(b"id,name\n1,x\n"), "emps.csv")},
        content_type="multipart/form-data",
    )
    assert "檔案欄位必須包含" in resp.get_data(as_text=True)


def test_upload_form(admin_client):
    client, _ = admin_client
    assert "匯入員工" in client.get("/?action=Employee&command=upload").get_data(as_text=True)


def test_index_with_huge_or_negative_page_shows_first_page(admin_client, make_employee):
    client, _ = admin_client
    make_employee(code="E001")
    for page in ("99999999999999999999", "0", "-3"):
        text = client.get(f"/?action=Employee&command=index&page={page}").get_data(as_text=True)
        assert "發生錯誤" not in text
        assert "E001" in text


def test_admin_deleted_mid_session_loses_access(admin_client):
    client, _ = admin_client
    assert "員工一覽" in client.get("/?action=Employee&command=index").get_data(as_text=True)

    admin = _get("A001")
    admin.mark_deleted()
    db.session.commit()

    text = client.get("/?action=Employee&command=index").get_data(as_text=True)
    assert "發生錯誤" in text
    assert "員工一覽" not in text
