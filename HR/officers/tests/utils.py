from datetime import date, timedelta
from decimal import Decimal

from HR.officers.models import Officer

_counter = {'value': 0}


def create_officer(**overrides):
    """Officer with every catalogued field populated."""
    _counter['value'] += 1
    n = _counter['value']
    data = {
        'full_name': f'Officer {n}',
        'name_bangla': f'কর্মকর্তা {n}',
        'employee_id': f'EMP-{n:04d}',
        'designation': 'Deputy Secretary',
        'office': 'Secretariat',
        'department': 'Finance',
        'joining_date': date(2015, 7, 1),
        'photo_url': f'https://cdn.example.gov/photos/{n}.jpg',
        'personal_mobile': '01712345678',
        'official_mobile': '01898765432',
        'personal_email': f'rahim{n}@mail.example.com',
        'official_email': f'rahim{n}@mof.gov.bd',
        'nid_number': f'199012345678{n:05d}',
        'passport_number': f'BX{n:07d}',
        'tin_number': f'5400{n:08d}',
        'date_of_birth': date(1990, 1, 15),
        'father_name': 'Abdul Karim',
        'mother_name': 'Rahima Begum',
        'blood_group': 'B+',
        'religion': 'Islam',
        'marital_status': 'Married',
        'present_address': 'House 12, Road 5, Dhanmondi, Dhaka',
        'permanent_address': 'Village Char, Comilla',
        'emergency_contact_name': 'Karim Uddin',
        'emergency_contact_phone': '01911223344',
        'current_grade': '5',
        'basic_salary': Decimal('43000.00'),
        'bank_account_number': f'00121000{n:06d}',
    }
    data.update(overrides)
    return Officer.objects.create(**data)


class FrozenClock:
    """Callable clock for services and workflows; advance() moves it forward."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
