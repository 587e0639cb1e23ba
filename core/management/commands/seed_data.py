from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from investments import services as investment_services
from investments.models import Investment
from projects import services as project_services
from projects.models import Project
from users import services as user_services

User = get_user_model()

PASSWORD = "Predika-demo-2024"


class Command(BaseCommand):
    help = "Seeds the database with demo users, projects and one funded investment"

    def _user(self, username, email, role, superuser=False):
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": email, "role": role, "is_staff": superuser, "is_superuser": superuser},
        )
        if created or not user.check_password(PASSWORD):
            user.set_password(PASSWORD)
            user.save()
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding marketplace data...")

        # 1. Users
        admin = self._user("admin", "admin@predika.local", User.Role.ADMIN, superuser=True)
        awa = self._user("awa", "awa@predika.local", User.Role.ENTREPRENEUR)
        moussa = self._user("moussa", "moussa@predika.local", User.Role.INVESTOR)
        fatou = self._user("fatou", "fatou@predika.local", User.Role.INVESTOR)

        # KYC: fatou stays in the review queue
        for user in (awa, moussa):
            if user.kyc_status == User.ReviewStatus.PENDING:
                user_services.approve_kyc(admin, user.pk)

        # 2. Projects, walked through the normal lifecycle
        projects_data = [
            {
                "title": "Solar irrigation for Thiès farms",
                "description": "Solar-powered drip irrigation for twelve smallholder farms.",
                "target_amount": Decimal("1000000.00"),
                "category": "agriculture",
                "country": "Senegal",
                "contract_type": Project.ContractType.MUDARABAH,
                "sharia_compliant": True,
                "expected_return": Decimal("12.00"),
                "risk_level": Project.RiskLevel.MEDIUM,
            },
            {
                "title": "Cold storage hub in Bamako",
                "description": "Shared cold room for fruit and vegetable wholesalers.",
                "target_amount": Decimal("2500000.00"),
                "category": "logistics",
                "country": "Mali",
                "contract_type": Project.ContractType.MUSHARAKA,
                "sharia_compliant": True,
                "expected_return": Decimal("9.50"),
                "risk_level": Project.RiskLevel.LOW,
            },
            {
                "title": "Tailoring workshop expansion",
                "description": "Three new industrial machines and an apprentice programme.",
                "target_amount": Decimal("600000.00"),
                "category": "textile",
                "country": "Côte d'Ivoire",
                "contract_type": Project.ContractType.CONVENTIONAL_LOAN,
                "expected_return": Decimal("8.00"),
                "risk_level": Project.RiskLevel.HIGH,
            },
        ]

        seeded = []
        for data in projects_data:
            project = Project.objects.filter(title=data["title"]).first()
            if project is None:
                data = {**data, "deadline": timezone.now() + timedelta(days=60)}
                project = project_services.create_project(awa, data)
                project_services.submit_project(awa, project.pk)
                project_services.approve_project(admin, project.pk)
                project_services.launch_project(admin, project.pk)
                project.refresh_from_db()
            seeded.append(project)
            self.stdout.write(f"Project: {project.title} ({project.status})")

        # 3. One confirmed investment, one still pending
        solar = seeded[0]
        if not Investment.objects.filter(project=solar).exists():
            confirmed = investment_services.create_investment(moussa, solar.pk, Decimal("600000.00"))
            investment_services.admin_confirm_payment(admin, confirmed.pk)
            investment_services.create_investment(fatou, solar.pk, Decimal("150000.00"))

        solar.refresh_from_db()
        self.stdout.write(
            f"Raised on '{solar.title}': {solar.raised_amount} / {solar.target_amount}"
        )
        self.stdout.write(self.style.SUCCESS(f"Seeding complete. Demo password: {PASSWORD}"))
