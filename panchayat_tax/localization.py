"""
Bilingual (English / Hindi) labels for bills and reports
"""

EN = 'en'
HI = 'hi'
BILINGUAL = 'bilingual'

LANGUAGES = (EN, HI, BILINGUAL)

LANGUAGE_CHOICES = [
    (EN, 'English'),
    (HI, 'हिन्दी'),
    (BILINGUAL, 'English / हिन्दी'),
]


LABELS = {
    'panchayatName': {
        'en': 'Loni Gram Panchayat',
        'hi': 'लोनी ग्राम पंचायत',
        'bilingual': 'Loni Gram Panchayat / लोनी ग्राम पंचायत',
    },
    'panchayatAddress': {
        'en': 'Loni, District Ghaziabad, Uttar Pradesh',
        'hi': 'लोनी, जिला गाजियाबाद, उत्तर प्रदेश',
        'bilingual': 'Loni, District Ghaziabad, Uttar Pradesh',
    },
    'taxBillTitle': {
        'en': 'Property Tax Bill / Receipt',
        'hi': 'संपत्ति कर बिल / रसीद',
        'bilingual': 'Property Tax Bill / Receipt | संपत्ति कर बिल / रसीद',
    },
    'billNo': {
        'en': 'Bill No.',
        'hi': 'बिल संख्या',
        'bilingual': 'Bill No. / बिल संख्या',
    },
    'date': {
        'en': 'Date',
        'hi': 'दिनांक',
        'bilingual': 'Date / दिनांक',
    },
    'dueDate': {
        'en': 'Due Date',
        'hi': 'देय तिथि',
        'bilingual': 'Due Date / देय तिथि',
    },
    'propertyId': {
        'en': 'Property ID',
        'hi': 'संपत्ति आईडी',
        'bilingual': 'Property ID / संपत्ति आईडी',
    },
    'billTo': {
        'en': 'Bill To',
        'hi': 'बिल भेजा गया',
        'bilingual': 'Bill To / बिल भेजा गया',
    },
    # no composed variant; bilingual falls back to English
    'fathersName': {
        'en': "Father's/Husband's Name",
        'hi': 'पिता/पति का नाम',
    },
    'address': {
        'en': 'Address',
        'hi': 'पता',
        'bilingual': 'Address / पता',
    },
    'houseNo': {
        'en': 'House No.',
        'hi': 'मकान नं.',
        'bilingual': 'House No. / मकान नं.',
    },
    'mobile': {
        'en': 'Mobile',
        'hi': 'मोबाइल',
        'bilingual': 'Mobile / मोबाइल',
    },
    'srNo': {
        'en': 'Sr.',
        'hi': 'क्र.',
        'bilingual': 'Sr. / क्र.',
    },
    'taxType': {
        'en': 'Tax Type',
        'hi': 'कर का प्रकार',
        'bilingual': 'Tax Type / कर का प्रकार',
    },
    'assessedAmount': {
        'en': 'Assessed',
        'hi': 'निर्धारित',
        'bilingual': 'Assessed / निर्धारित',
    },
    'amountPaid': {
        'en': 'Paid',
        'hi': 'भुगतान',
        'bilingual': 'Paid / भुगतान',
    },
    'dueAmount': {
        'en': 'Due',
        'hi': 'बकाया',
        'bilingual': 'Due / बकाया',
    },
    'total': {
        'en': 'Total',
        'hi': 'कुल',
        'bilingual': 'Total / कुल',
    },
    'signature': {
        'en': 'Signature',
        'hi': 'हस्ताक्षर',
        'bilingual': 'Signature / हस्ताक्षर',
    },
    'secretary': {
        'en': 'Secretary',
        'hi': 'सचिव',
        'bilingual': 'Secretary / सचिव',
    },
    'notAvailable': {
        'en': 'N/A',
        'hi': 'उपलब्ध नहीं',
        'bilingual': 'N/A',
    },
    'page': {
        'en': 'Page',
        'hi': 'पृष्ठ',
        'bilingual': 'Page / पृष्ठ',
    },
}


TAX_TYPE_HINDI = {
    'Property Tax': 'संपत्ति कर',
    'Water Tax': 'जल कर',
    'Sanitation Tax': 'स्वच्छता कर',
    'Lighting Tax': 'प्रकाश कर',
    'Land Tax': 'भूमि कर',
    'Business Tax': 'व्यापार कर',
    'Other': 'अन्य',
}


def resolve(key, language):
    """Label text for key in language; English when that language has no entry"""
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language: {language!r}")
    entry = LABELS[key]
    return entry.get(language) or entry['en']


def translator(language):
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language: {language!r}")
    return lambda key: resolve(key, language)


def hindi_tax_name(tax_type):
    return TAX_TYPE_HINDI.get(tax_type, '')
