#!/usr/bin/env python
"""Idempotent seed script for permission modules & default roles.

Usage:
    python backend/scripts/seed_authz.py                        # seed normally
    python backend/scripts/seed_authz.py --show-roles           # print role -> module counts (after seeding)
    python backend/scripts/seed_authz.py --dry-run              # run logic then rollback (no DB changes)
    python backend/scripts/seed_authz.py --admin-email a@b.com  # also create a platform admin if missing
"""
from __future__ import annotations
import os, sys, argparse, textwrap
from sqlalchemy import select, text

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from hrms import create_app, get_db  # type: ignore
from hrms.models.authz import Base, Role, User
from hrms.constants.permissions import ROLE_ADMIN
from hrms.services.seeding import ensure_default_modules, ensure_default_roles


def ensure_initial_admin(session, email: str):
    existing = session.execute(select(User).where(User.email == email.lower())).scalar_one_or_none()
    if existing:
        print(f"[INFO] Admin {email} already present (role={existing.role})")
        return False
    user = User(
        employee_id=os.getenv('SEED_ADMIN_EMPLOYEE_ID', 'ADMIN-001'), name='Administrator', email=email.lower(),
        role=ROLE_ADMIN, company_id=None, department='Administration', position='System Administrator',
        password_hash='',
    )
    user.set_password(os.getenv('SEED_ADMIN_PASSWORD', 'ChangeMe123!'))
    session.add(user)
    session.flush()
    print(f"[INFO] Created platform admin {email} with temporary password.")
    return True


def print_role_summary(session):
    rows = []
    for role in session.execute(select(Role).order_by(Role.is_system.desc(), Role.role_name.asc())).scalars():
        entries = role.permissions or []
        rows.append((role.role_name, role.status, len(entries), [e.get('module') for e in entries][:8]))
    if not rows:
        print("[INFO] No roles present.")
        return
    name_w = max(len(r[0]) for r in rows)
    print(f"{'Role'.ljust(name_w)} | Status   | Modules | Sample (up to 8)")
    print('-' * (name_w + 50))
    for name, status, cnt, sample in rows:
        print(f"{name.ljust(name_w)} | {status.ljust(8)} | {str(cnt).rjust(7)} | {', '.join(sample)}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Seed HRMS permission modules & default roles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_authz.py\n  dry run: seed_authz.py --dry-run\n  show roles: seed_authz.py --show-roles\n""")
    )
    p.add_argument('--show-roles', action='store_true', help='Print role module counts after seeding')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    p.add_argument('--admin-email', metavar='EMAIL', default=os.getenv('SEED_ADMIN_EMAIL'),
                   help='Create a platform admin with this email when absent')
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            session.execute(text('SELECT 1 FROM roles LIMIT 1'))
        except Exception:
            # Auto-create schema for bootstrap; in real env prefer alembic upgrade
            session.rollback()
            import hrms.models.leave, hrms.models.expense, hrms.models.task, hrms.models.attendance, hrms.models.policy  # noqa: F401
            Base.metadata.create_all(session.get_bind())
        finally:
            session.commit()

    with app.app_context():
        session = get_db()
        try:
            mod_created, _ = ensure_default_modules(session)
            role_created, role_updated = ensure_default_roles(session)
            if args.admin_email:
                ensure_initial_admin(session, args.admin_email)
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) Modules would create: {mod_created}, Roles would create: {role_created}")
            else:
                session.commit()
                print(f"[DONE] Modules created: {mod_created}, Roles created: {role_created}, Roles refreshed: {role_updated}")
            if args.show_roles:
                print('\nRole Permission Summary:')
                print_role_summary(session)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


if __name__ == '__main__':
    main()
