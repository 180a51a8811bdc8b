"""Salesforce object and field name constants."""

DEFAULT_API_VERSION = "v60.0"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Objects
CONTRACT_OBJECT = "Contract__c"
HISTORY_OBJECT = "OpportunityHistory"
LEAD_OBJECT = "Lead"

# Contract
ID = "Id"
NAME = "Name"
CREATED_DATE = "CreatedDate"
CONTRACT_DATE_START = "ContractDateStart__c"
CONTRACT_DATE_END = "ContractDateEnd__c"
CONTRACT_STATUS = "ContractStatus__c"
OPPORTUNITY_ID = "Opportunity__c"
OPPORTUNITY_REL = "Opportunity__r"
ACCOUNT_REL = "Account__r"

# Related lists on the contract
PRODUCTS_REL = "ContractProductQuoteContract__r"
PROMOTIONS_REL = "ContractProductPromotionContract__r"

# Line items
PRODUCT_FAMILY = "fm_ContractProductFamily__c"
PRODUCT_TOTAL_PRICE = "TotalPrice__c"
PRODUCT_QUANTITY = "Quantity__c"

# Native promotions
PROMOTION_AMOUNT = "TotalAmount__c"
PROMOTION_NAME_REL = "PromotionName__r"

# Opportunity
OPP_CONVERTED_LEAD_ID = "ConvertedLeadID__c"
OPP_OWNER_DEPARTMENT = "Owner_Department__c"

# Account
ACCOUNT_BRANCH_NAME = "BranchName__c"
ACCOUNT_INDUSTRY_FIRST = "PLIndustry_First__c"
ACCOUNT_INDUSTRY_SECOND = "PLIndustry_Second__c"
ACCOUNT_BUSINESS_TYPE = "TypeofB__c"

# Opportunity history
HISTORY_OPPORTUNITY_ID = "OpportunityId"
HISTORY_STAGE_NAME = "StageName"

# Lead
LEAD_COMPANY = "Company"
LEAD_SOURCE = "LeadSource"
LEAD_CONVERTED_OPPORTUNITY_ID = "ConvertedOpportunityId"
# The UTM field has been seen under three spellings
LEAD_UTM_FIELDS = ("utm__c", "UTM__c", "Utm__c")
# Key prefix of Salesforce Lead ids
LEAD_ID_PREFIX = "00Q"

# Contract statuses included in reporting (signed, awaiting signature)
SIGNED_CONTRACT_STATUSES = ("계약서명완료", "계약서명대기")

# Maximum literals in one IN (...) list
MAX_IN_LIST = 100
