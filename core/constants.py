# core/constants.py

# --- Activity Verbs (Standard Registry) ---

# Projects
ACTIVITY_PROJECT_CREATED = "project.created"
ACTIVITY_PROJECT_UPDATED = "project.updated"
ACTIVITY_PROJECT_FUNDS_APPLIED = "project.funds_applied"

# Investments
ACTIVITY_INVESTMENT_CREATED = "investment.created"
ACTIVITY_PAYMENT_CONFIRMED = "investment.payment_confirmed"

# Contracts
ACTIVITY_CONTRACT_GENERATED = "contract.generated"
ACTIVITY_CONTRACT_SIGNATURE = "contract.signature"

# Transition verbs are derived from the entity label and action,
# e.g. "project.launch", "investment.initiate_payment", "contract.sign".
