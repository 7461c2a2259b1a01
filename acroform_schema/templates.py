"""Static fallback schemas (merchant processing application).

Returned whole, in place of extracted data, when a document cannot be read,
exposes no widgets, or fails to structure. Two variants exist:

  - "current": the default, with section descriptions, help text and placeholders
  - "legacy": the older field-name set, kept for consumers still keyed on it

The tables are immutable records; every call builds fresh FormSection objects.
"""
from __future__ import annotations
import json
from datetime import datetime, timezone
from typing import List, Optional, Tuple, NamedTuple, Callable, Dict

from .schema import FormSection, FormField, FieldOption
from .naming import slugify_option


class TemplateField(NamedTuple):
    field_name: str
    field_type: str
    field_label: str
    is_required: bool
    position: int
    options: Optional[Tuple[str, ...]] = None
    validation: Optional[str] = None
    help_text: Optional[str] = None
    placeholder: Optional[str] = None
    max_date_key: Optional[str] = None  # validation key bounded by the current date


class TemplateSection(NamedTuple):
    title: str
    order: int
    fields: Tuple[TemplateField, ...]
    description: Optional[str] = None


def _rules(**rules) -> str:
    return json.dumps(rules, separators=(",", ":"))


US_STATES = (
    'AL', 'AK', 'AZ', 'AR', 'CA', 'CO', 'CT', 'DE', 'FL', 'GA', 'HI', 'ID', 'IL', 'IN', 'IA', 'KS', 'KY',
    'LA', 'ME', 'MD', 'MA', 'MI', 'MN', 'MS', 'MO', 'MT', 'NE', 'NV', 'NH', 'NJ', 'NM', 'NY', 'NC', 'ND',
    'OH', 'OK', 'OR', 'PA', 'RI', 'SC', 'SD', 'TN', 'TX', 'UT', 'VT', 'VA', 'WA', 'WV', 'WI', 'WY',
)
YES_NO = ('Yes', 'No')
NO_YES = ('No', 'Yes')

ZIP_PATTERN = r'^\d{5}(-\d{4})?$'
PHONE_PATTERN = r'^\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}$'
LEGACY_PHONE_PATTERN = r'^\(?\d{3}\)?[-.]?\d{3}[-.]?\d{4}$'
EMAIL_PATTERN = r'^[^@]+@[^@]+\.[^@]+$'
URL_PATTERN = r'^https?://.*'
PHONE_PLACEHOLDER = '(555) 123-4567'
ZIP_PLACEHOLDER = '12345 or 12345-6789'

MERCHANT_TYPES = (
    'Retail Outlet',
    'Restaurant/Food',
    'Lodging',
    'Home Business, Trade Fairs',
    'Outside Sales/Service, Other, etc.',
    'Mail/Telephone Order Only',
    'Internet',
    'Health Care',
)

MERCHANT_INFORMATION = 'Merchant Information'
BUSINESS_TAX = 'Business Type & Tax Information'
PRODUCTS_PROCESSING = 'Products, Services & Processing'
TRANSACTION_INFORMATION = 'Transaction Information'

CURRENT_SECTIONS: Tuple[TemplateSection, ...] = (
    TemplateSection(
        title=MERCHANT_INFORMATION,
        description='Basic business and contact information for the merchant account application',
        order=1,
        fields=(
            TemplateField('agentNumber', 'text', 'Agent #', False, 1,
                          help_text='Internal agent reference number',
                          placeholder='Enter agent number if applicable'),
            TemplateField('legalBusinessName', 'text', 'Legal Name of Business / IRS Filing Name', True, 2,
                          validation=_rules(minLength=2, maxLength=100),
                          help_text='Must match IRS records exactly',
                          placeholder='Enter legal business name as filed with IRS'),
            TemplateField('dbaName', 'text', 'DBA (Doing Business As)', False, 3,
                          validation=_rules(maxLength=100),
                          placeholder='Enter trade name if different from legal name'),
            TemplateField('locationAddress', 'text', 'Location / Site Address', True, 4,
                          validation=_rules(minLength=5, maxLength=200),
                          placeholder='Physical business address'),
            TemplateField('locationCity', 'text', 'City', True, 5,
                          validation=_rules(minLength=2, maxLength=50),
                          placeholder='Business city'),
            TemplateField('locationState', 'select', 'State', True, 6, options=US_STATES),
            TemplateField('locationZipCode', 'text', 'ZIP Code', True, 7,
                          validation=_rules(pattern=ZIP_PATTERN),
                          placeholder=ZIP_PLACEHOLDER),
            TemplateField('companyWebsite', 'url', 'Company Website Address (URL)', False, 8,
                          validation=_rules(pattern=URL_PATTERN),
                          placeholder='https://www.example.com'),
            TemplateField('mailingAddress', 'text', 'Mailing Address (if different from location)', False, 9,
                          validation=_rules(maxLength=200),
                          placeholder='Leave blank if same as location address'),
            TemplateField('mailingCity', 'text', 'Mailing City', False, 10,
                          validation=_rules(maxLength=50)),
            TemplateField('mailingState', 'select', 'Mailing State', False, 11, options=('',) + US_STATES),
            TemplateField('mailingZipCode', 'text', 'Mailing ZIP Code', False, 12,
                          validation=_rules(pattern=ZIP_PATTERN),
                          placeholder=ZIP_PLACEHOLDER),
            TemplateField('companyEmail', 'email', 'Company E-mail Address', True, 13,
                          validation=_rules(pattern=EMAIL_PATTERN),
                          placeholder='business@company.com'),
            TemplateField('companyPhone', 'phone', 'Company Phone #', True, 14,
                          validation=_rules(pattern=PHONE_PATTERN),
                          placeholder=PHONE_PLACEHOLDER),
            TemplateField('descriptorPhone', 'phone', 'Descriptor Phone # (E-commerce or MOTO)', False, 15,
                          validation=_rules(pattern=PHONE_PATTERN),
                          help_text='Phone number that appears on customer statements',
                          placeholder=PHONE_PLACEHOLDER),
            TemplateField('mobilePhone', 'phone', 'Mobile Phone #', False, 16,
                          validation=_rules(pattern=PHONE_PATTERN),
                          placeholder=PHONE_PLACEHOLDER),
            TemplateField('faxNumber', 'phone', 'Fax #', False, 17,
                          validation=_rules(pattern=PHONE_PATTERN),
                          placeholder=PHONE_PLACEHOLDER),
            TemplateField('contactName', 'text', 'Contact Name', True, 18,
                          validation=_rules(minLength=2, maxLength=100),
                          placeholder='Primary contact person'),
            TemplateField('contactTitle', 'text', 'Title', True, 19,
                          validation=_rules(maxLength=50),
                          placeholder='Owner, Manager, etc.'),
        ),
    ),
    TemplateSection(
        title=BUSINESS_TAX,
        description='Business structure, tax ID, and regulatory information',
        order=2,
        fields=(
            TemplateField('taxId', 'text', 'Tax ID / EIN', True, 20,
                          validation=_rules(pattern=r'^\d{2}-\d{7}$'),
                          help_text='Federal Employer Identification Number',
                          placeholder='12-3456789'),
            TemplateField('foreignEntity', 'checkbox', "I certify that I'm a foreign entity/nonresident alien", False, 21,
                          help_text='Check if applicable and attach IRS Form W-8'),
            TemplateField('businessType', 'select', 'Business Type', True, 22, options=(
                'Sole Proprietorship',
                'Partnership',
                'Private Corporation',
                'Public Corporation',
                'Tax Exempt Corporation',
                'Limited Liability Company',
            )),
            TemplateField('stateFiled', 'select', 'State Filed', True, 23, options=US_STATES,
                          help_text='State where business is incorporated/registered'),
            TemplateField('businessStartDate', 'date', 'Business Start Date', True, 24, max_date_key='max'),
            TemplateField('previouslyTerminated', 'select',
                          'Has this business or any associated principal been terminated as a '
                          'Visa/MasterCard/Amex/Discover network merchant?', True, 25, options=NO_YES),
            TemplateField('bankruptcyHistory', 'select',
                          'Has merchant or any associated principal filed bankruptcy or been subject to '
                          'involuntary bankruptcy?', True, 26, options=NO_YES),
            TemplateField('bankruptcyDate', 'date', 'Bankruptcy Date (if applicable)', False, 27),
            TemplateField('currentlyAcceptCards', 'select', 'Do you currently accept Visa/MC/Amex/Discover Network?',
                          True, 28, options=NO_YES,
                          help_text='If Yes, you must submit 3 most current monthly statements'),
            TemplateField('previousProcessor', 'text', 'Previous Card Processor', False, 29,
                          placeholder='Name of current/previous processor'),
            TemplateField('reasonToChange', 'select', 'Reason to Change', False, 30,
                          options=('', 'Rates', 'Service', 'Other')),
            TemplateField('terminationDate', 'date', 'Termination Date (if applicable)', False, 31),
        ),
    ),
    TemplateSection(
        title=PRODUCTS_PROCESSING,
        description='Business operations, products/services sold, and payment processing preferences',
        order=3,
        fields=(
            TemplateField('merchantSells', 'textarea', 'Merchant Sells (specify product, service and/or information)',
                          True, 32, validation=_rules(minLength=10, maxLength=500),
                          placeholder='Describe the products and/or services your business sells'),
            TemplateField('mccCode', 'mcc-select', 'Merchant Category Code (MCC)', True, 33,
                          help_text='Select the merchant category code that best describes your primary business '
                                    'activity. This code is used for payment processing classification and risk '
                                    'assessment.'),
            TemplateField('thirdPartyDataStorage', 'select',
                          "Do you use any third party to store, process or transmit cardholder's data?",
                          True, 34, options=NO_YES),
            TemplateField('thirdPartyCompanyInfo', 'text', 'Third Party Company Information (if applicable)',
                          False, 35, validation=_rules(maxLength=200),
                          placeholder='Company name, address and phone number'),
            TemplateField('refundPolicy', 'select', 'Refund Policy for Visa/MasterCard/Amex/Discover Network Sales',
                          True, 36, options=(
                              'Refund will be granted to a customer as follows',
                              'No refund. All sales final (Merchant must notify customers)',
                              'Exchange',
                              'Store Credit',
                          )),
            # Shares position 36 with refundPolicy; renderers order by section then list order
            TemplateField('refundTimeframe', 'select', 'Credit Exchange Timeframe', False, 36,
                          options=('', '0-3 Days', '4-7 Days', '8-14 Days', 'Over 14 Days')),
        ),
    ),
    TemplateSection(
        title=TRANSACTION_INFORMATION,
        description='Financial data and transaction processing details',
        order=4,
        fields=(
            TemplateField('avgMonthlyVolume', 'number', 'Average Combined Monthly Visa/MC/Discover/Amex Volume ($)',
                          True, 37, validation=_rules(min=0, max=999999999), placeholder='10000'),
            TemplateField('avgTicketAmount', 'number', 'Average Visa/MC/Amex/Discover Network Ticket ($)',
                          True, 38, validation=_rules(min=0, max=99999), placeholder='50.00'),
            TemplateField('highestTicketAmount', 'number', 'Highest Ticket Amount ($)',
                          True, 39, validation=_rules(min=0, max=999999), placeholder='500.00'),
            TemplateField('seasonal', 'checkbox', 'Seasonal Business', False, 40),
            TemplateField('highestVolumeMonths', 'number', 'Highest Volume Months ($)',
                          False, 41, validation=_rules(min=0, max=999999999), placeholder='25000'),
            TemplateField('merchantType', 'select', 'Merchant Type', True, 42, options=MERCHANT_TYPES),
        ),
    ),
)

LEGACY_SECTIONS: Tuple[TemplateSection, ...] = (
    TemplateSection(
        title=MERCHANT_INFORMATION,
        order=1,
        fields=(
            TemplateField('legalBusinessName', 'text', 'Legal Name of Business / IRS Filing Name', True, 1,
                          validation=_rules(minLength=2, maxLength=100)),
            TemplateField('dbaName', 'text', 'DBA (Doing Business As)', False, 2,
                          validation=_rules(maxLength=100)),
            TemplateField('locationAddress', 'text', 'Location / Site Address', True, 3,
                          validation=_rules(minLength=5, maxLength=200)),
            TemplateField('locationCity', 'text', 'City', True, 4,
                          validation=_rules(minLength=2, maxLength=50)),
            TemplateField('locationState', 'select', 'State', True, 5, options=US_STATES),
            TemplateField('locationZipCode', 'text', 'ZIP Code', True, 6,
                          validation=_rules(pattern=ZIP_PATTERN)),
            TemplateField('companyWebsite', 'url', 'Company Website Address (URL)', False, 7,
                          validation=_rules(pattern=URL_PATTERN)),
            TemplateField('mailingAddress', 'text', 'Mailing Address (if different from location)', False, 8,
                          validation=_rules(maxLength=200)),
            TemplateField('mailingCity', 'text', 'Mailing City', False, 9,
                          validation=_rules(maxLength=50)),
            TemplateField('mailingState', 'select', 'Mailing State', False, 10, options=US_STATES),
            TemplateField('mailingZipCode', 'text', 'Mailing ZIP Code', False, 11,
                          validation=_rules(pattern=ZIP_PATTERN)),
            TemplateField('companyEmail', 'email', 'Company E-mail Address', True, 12,
                          validation=_rules(pattern=EMAIL_PATTERN)),
            TemplateField('companyPhone', 'phone', 'Company Phone #', True, 13,
                          validation=_rules(pattern=LEGACY_PHONE_PATTERN)),
            TemplateField('descriptorPhone', 'phone', 'Descriptor Phone # (E-commerce or MOTO)', False, 14,
                          validation=_rules(pattern=LEGACY_PHONE_PATTERN)),
            TemplateField('mobilePhone', 'phone', 'Mobile Phone #', False, 15,
                          validation=_rules(pattern=LEGACY_PHONE_PATTERN)),
            TemplateField('faxNumber', 'phone', 'Fax #', False, 16,
                          validation=_rules(pattern=LEGACY_PHONE_PATTERN)),
            TemplateField('contactName', 'text', 'Contact Name', True, 17,
                          validation=_rules(minLength=2, maxLength=100)),
            TemplateField('contactTitle', 'text', 'Contact Title', False, 18,
                          validation=_rules(maxLength=50)),
            TemplateField('taxId', 'text', 'Tax ID', True, 19,
                          validation=_rules(pattern=r'^\d{2}-\d{7}$|^\d{3}-\d{2}-\d{4}$')),
            TemplateField('foreignEntity', 'checkbox', "I certify that I'm a foreign entity/nonresident alien",
                          False, 20),
        ),
    ),
    TemplateSection(
        title='Business Type & History',
        order=2,
        fields=(
            TemplateField('businessType', 'select', 'Business Type', True, 21, options=(
                'Partnership', 'Sole Proprietorship', 'Public Corp.', 'Private Corp.', 'Tax Exempt Corp.',
                'Limited Liability Company',
            )),
            TemplateField('stateFiled', 'select', 'State Filed', False, 22, options=US_STATES),
            TemplateField('businessStartDate', 'date', 'Business Start Date', True, 23, max_date_key='maxDate'),
            TemplateField('previouslyTerminated', 'select',
                          'Has this business or any associated principal been terminated as a '
                          'Visa/MasterCard/Amex/Discover network merchant?', True, 24, options=YES_NO),
            TemplateField('currentlyAccepting', 'select', 'Do you currently accept Visa/MC/Amex/Discover Network?',
                          True, 25, options=YES_NO),
            TemplateField('previousProcessor', 'text', 'Your Previous Card Processor', False, 26,
                          validation=_rules(maxLength=100)),
            TemplateField('reasonToChange', 'select', 'Reason to Change', False, 27,
                          options=('Rates', 'Service', 'Other')),
            TemplateField('filedBankruptcy', 'select',
                          'Has merchant or any associated principal filed bankruptcy or been subject to an '
                          'involuntary bankruptcy?', True, 28, options=YES_NO),
        ),
    ),
    TemplateSection(
        title='Products & Services',
        order=3,
        fields=(
            TemplateField('merchantSells', 'textarea', 'Merchant Sells (specify product, service and/or information)',
                          True, 29, validation=_rules(minLength=10, maxLength=500)),
            TemplateField('thirdPartyDataStorage', 'select',
                          "Do you use any third party to store, process or transmit cardholder's data?",
                          True, 30, options=YES_NO),
            TemplateField('thirdPartyCompanyName', 'text', 'Third Party Company Name, Address and Phone',
                          False, 31, validation=_rules(maxLength=200)),
            TemplateField('refundPolicy', 'select', 'Refund Policy for Visa/MasterCard/Amex/Discover Network Sales',
                          True, 32, options=('No Refund. All Sales Final',
                                             'Refund will be granted to a customer as follows')),
            TemplateField('creditExchangeTimeframe', 'select', 'Visa/MC/Amex/Discover Network Credit Exchange Timeframe',
                          False, 33, options=('0-3 Days', '4-7 Days', '8-14 Days', 'Over 14 Days')),
        ),
    ),
    TemplateSection(
        title=TRANSACTION_INFORMATION,
        order=4,
        fields=(
            TemplateField('averageMonthlyVolume', 'number', 'Average Combined Monthly Visa/MC/Discover/Amex Volume ($)',
                          True, 34, validation=_rules(min=0, max=99999999)),
            TemplateField('averageTicket', 'number', 'Average Visa/MC/Amex/Discover Network Ticket ($)',
                          True, 35, validation=_rules(min=0, max=99999)),
            TemplateField('highestTicket', 'number', 'Highest Ticket Amount ($)',
                          True, 36, validation=_rules(min=0, max=99999)),
            TemplateField('seasonal', 'select', 'Seasonal Business?', True, 37, options=YES_NO),
            TemplateField('merchantType', 'select', 'Merchant Type', True, 38, options=MERCHANT_TYPES),
            TemplateField('swipedCreditCards', 'number', 'Swiped Credit Cards (%)', True, 39,
                          validation=_rules(min=0, max=100)),
            TemplateField('keyedCreditCards', 'number', 'Keyed Credit Cards (%)', True, 40,
                          validation=_rules(min=0, max=100)),
            TemplateField('motoPercentage', 'number', 'MO/TO (%)', False, 41,
                          validation=_rules(min=0, max=100)),
            TemplateField('internetPercentage', 'number', 'Internet (%)', False, 42,
                          validation=_rules(min=0, max=100)),
        ),
    ),
)

CURRENT_TEMPLATE_FIELD_COUNT = 43
LEGACY_TEMPLATE_FIELD_COUNT = 42


def _max_date_value(key: str) -> str:
    if key == 'maxDate':
        return datetime.now(timezone.utc).isoformat()
    return datetime.now(timezone.utc).date().isoformat()


def _build_sections(table: Tuple[TemplateSection, ...], strict_slugs: bool) -> List[FormSection]:
    sections: List[FormSection] = []
    for s in table:
        fields: List[FormField] = []
        for f in s.fields:
            options = None
            if f.options is not None:
                options = []
                for opt in f.options:
                    value = slugify_option(opt, strict=strict_slugs)
                    options.append(FieldOption(label=opt, value=value, source_widget_id=f"{f.field_name}_{value}"))
            validation = f.validation
            if f.max_date_key:
                validation = _rules(**{f.max_date_key: _max_date_value(f.max_date_key)})
            fields.append(FormField(
                field_name=f.field_name,
                field_type=f.field_type,
                field_label=f.field_label,
                is_required=f.is_required,
                position=f.position,
                section=s.title,
                options=options,
                validation=validation,
                help_text=f.help_text,
                placeholder=f.placeholder,
            ))
        sections.append(FormSection(title=s.title, order=s.order, fields=fields, description=s.description))
    return sections


def current_template() -> List[FormSection]:
    return _build_sections(CURRENT_SECTIONS, strict_slugs=False)


def legacy_template() -> List[FormSection]:
    return _build_sections(LEGACY_SECTIONS, strict_slugs=True)


FALLBACK_TEMPLATES: Dict[str, Callable[[], List[FormSection]]] = {
    "current": current_template,
    "legacy": legacy_template,
}


def get_fallback_template(variant: str = "current") -> List[FormSection]:
    try:
        provider = FALLBACK_TEMPLATES[variant]
    except KeyError:
        raise ValueError(f"Unknown fallback template variant: {variant!r}") from None
    return provider()


def count_fields(sections: List[FormSection]) -> int:
    return sum(len(s.fields) for s in sections)
