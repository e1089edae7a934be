"""Reference tables the sample data generator draws from."""

from portfolio.models.portfolio import TherapeuticArea

MECHANISM_TYPES = [
    "Monoclonal Antibody",
    "Small Molecule Inhibitor",
    "Gene Therapy",
    "Cell Therapy",
    "RNA Interference",
    "CRISPR-based Therapy",
    "Protein Degrader",
    "Bispecific Antibody",
    "CAR-T Cell Therapy",
    "ADC (Antibody-Drug Conjugate)",
]

INDICATIONS: dict[TherapeuticArea, list[str]] = {
    TherapeuticArea.ONCOLOGY: [
        "Non-Small Cell Lung Cancer",
        "Metastatic Breast Cancer",
        "Acute Myeloid Leukemia",
        "Glioblastoma",
        "Colorectal Cancer",
        "Multiple Myeloma",
    ],
    TherapeuticArea.NEUROLOGY: [
        "Alzheimer's Disease",
        "Parkinson's Disease",
        "Multiple Sclerosis",
        "Amyotrophic Lateral Sclerosis",
        "Epilepsy",
        "Migraine",
    ],
    TherapeuticArea.CARDIOLOGY: [
        "Heart Failure",
        "Atrial Fibrillation",
        "Hypertension",
        "Coronary Artery Disease",
        "Hyperlipidemia",
    ],
    TherapeuticArea.IMMUNOLOGY: [
        "Rheumatoid Arthritis",
        "Systemic Lupus Erythematosus",
        "Inflammatory Bowel Disease",
        "Crohn's Disease",
        "Psoriasis",
    ],
    TherapeuticArea.INFECTIOUS_DISEASE: [
        "HIV/AIDS",
        "Hepatitis C",
        "Tuberculosis",
        "COVID-19",
        "Influenza",
    ],
    TherapeuticArea.RARE_DISEASE: [
        "Duchenne Muscular Dystrophy",
        "Cystic Fibrosis",
        "Huntington Disease",
        "Spinal Muscular Atrophy",
        "Gaucher Disease",
    ],
    TherapeuticArea.METABOLIC: [
        "Type 2 Diabetes",
        "Non-Alcoholic Steatohepatitis",
        "Obesity",
        "Hypercholesterolemia",
    ],
    TherapeuticArea.RESPIRATORY: [
        "Chronic Obstructive Pulmonary Disease",
        "Asthma",
        "Idiopathic Pulmonary Fibrosis",
        "Pulmonary Arterial Hypertension",
    ],
}

PROJECT_LEADS = [
    "Dr. Sarah Chen",
    "Dr. Michael Rodriguez",
    "Dr. Aisha Patel",
    "Dr. James Wilson",
    "Dr. Maria Santos",
    "Dr. David Kim",
    "Dr. Jennifer Brown",
    "Dr. Robert Taylor",
]

INVESTIGATORS = [
    "Prof. Elizabeth Anderson",
    "Dr. Thomas Moore",
    "Prof. Lisa Martinez",
    "Dr. Christopher Lee",
    "Prof. Amanda White",
    "Dr. Daniel Garcia",
    "Prof. Rachel Johnson",
    "Dr. William Davis",
]

MILESTONE_TEMPLATES = [
    "IND Submission",
    "First Patient Enrolled",
    "Database Lock",
    "Primary Analysis Complete",
    "NDA/BLA Submission",
    "FDA Review Complete",
    "Manufacturing Scale-Up",
    "Safety Review Board Meeting",
]

ONCOLOGY_ENDPOINT = "Overall Survival"
DEFAULT_ENDPOINT = "Change from baseline in clinical assessment score"
