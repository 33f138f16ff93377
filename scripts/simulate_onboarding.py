"""
Onboarding Simulation — register a driver, upload the 3 required documents
and approve (or reject) it against the configured store.

Usage:
    python scripts/simulate_onboarding.py --storage memory
    python scripts/simulate_onboarding.py --storage sql --reject "CNH ilegível"
"""
import argparse
import os
import random
import sys
import tempfile
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.api.dependencies import build_services
from src.config.settings import Settings
from src.core.entities.document import REQUIRED_DOC_TYPES
from src.core.errors import OnboardingError
from src.core.use_cases.register_driver import RegistrationInput
from src.core.use_cases.submit_documents import DocumentUpload

# 1x1 PNG
TINY_PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000100e221bc330000000049454e44ae426082"
)


def random_cpf() -> str:
    """CPF aleatório com dígitos verificadores válidos."""
    while True:
        nums = [random.randint(0, 9) for _ in range(9)]
        if len(set(nums)) > 1:
            break
    for size in (9, 10):
        total = sum(n * w for n, w in zip(nums, range(size + 1, 1, -1)))
        check = (total * 10) % 11
        nums.append(0 if check == 10 else check)
    return "".join(str(n) for n in nums)


def build_registration(email: str) -> RegistrationInput:
    today = date.today()
    return RegistrationInput(
        name="Motorista Simulado",
        birth_date=f"15/05/{today.year - 30}",
        national_id=random_cpf(),
        license_number="".join(str(random.randint(0, 9)) for _ in range(11)),
        license_category="B",
        license_expiry=f"15/05/{today.year + 3}",
        plate=f"SIM{random.randint(0, 9)}A{random.randint(10, 99)}",
        vehicle_model="Onix 1.0",
        phone=f"119{random.randint(10_000_000, 99_999_999)}",
        email=email,
        password="SenhaForte123!",
        password_confirmation="SenhaForte123!",
    )


def main():
    parser = argparse.ArgumentParser(description="Simulate a full driver onboarding")
    parser.add_argument("--storage", default=None, choices=["memory", "json", "sql"],
                        help="Store backend (default: STORAGE_BACKEND from settings)")
    parser.add_argument("--email", default=None, help="Driver e-mail (default: random)")
    parser.add_argument("--reject", default=None, metavar="REASON", help="Reject instead of approving")
    parser.add_argument("--upload-dir", default=None, help="Where fake documents are written")
    args = parser.parse_args()

    overrides = {}
    if args.storage:
        overrides["storage_backend"] = args.storage
    overrides["upload_dir"] = args.upload_dir or tempfile.mkdtemp(prefix="onboarding-")
    settings = Settings(**overrides)
    services = build_services(settings)

    email = args.email or f"sim{random.randint(1000, 9999)}@motoristas.local"

    print(f"{'='*60}")
    print(f"  Driver Onboarding — Simulation")
    print(f"{'='*60}")
    print(f"  Storage:  {settings.storage_backend}")
    print(f"  Notifier: {settings.notifier_backend}")
    print(f"  Uploads:  {settings.upload_dir}")
    print(f"{'='*60}\n")

    try:
        # ── Register ──
        print("[1/3] Registering driver...")
        driver = services.register.execute(build_registration(email))
        print(f"  → id={driver.id}")
        print(f"  → status={driver.status.value}")

        # ── Upload documents ──
        print("\n[2/3] Uploading documents one by one...")
        for doc_type in REQUIRED_DOC_TYPES:
            ref = services.storage.save(driver.id, f"{doc_type.value}.png", TINY_PNG, "image/png")
            result = services.documents.submit_one(
                driver.id,
                DocumentUpload(doc_type=doc_type.value, file_path=ref.path, format="png", size_bytes=ref.size_bytes),
            )
            print(f"  → {doc_type.value:12s} status={result.driver.status.value}")

        # ── Review ──
        print("\n[3/3] Reviewing...")
        if args.reject:
            driver = services.review.reject(driver.id, args.reject)
        else:
            driver = services.review.approve(driver.id)
        print(f"  → status={driver.status.value}")
        print(f"  → documents={[(d.doc_type.value, d.status.value) for d in driver.documents]}")
    except OnboardingError as e:
        print(f"\n  ✗ {e.code}: {e.message}")
        sys.exit(1)

    print(f"\n{'='*60}")
    print(f"  Done. Files under {os.path.abspath(settings.upload_dir)}")
    print(f"{'='*60}")


if __name__ == "__main__":
    main()
