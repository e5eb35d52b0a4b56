"""Fixed URLs and keys of the document profile.

Resource keys are the second path segment of every resource fragment;
extension URLs identify the extensions the converters read and write;
value set URLs select a lookup table in the terminology resolver.
"""

# Resource keys
PATIENT_KEY = "KBV_PR_MIO_ULB_Patient"
CONTACT_PERSON_KEY = "KBV_PR_MIO_ULB_RelatedPerson_Contact_Person"
PRACTITIONER_KEY = "KBV_PR_MIO_ULB_Practitioner"
PRACTITIONER_ROLE_KEY = "KBV_PR_MIO_ULB_PractitionerRole"
ORGANIZATION_KEY = "KBV_PR_MIO_ULB_Organization"
COMPOSITION_KEY = "KBV_PR_MIO_ULB_Composition"


class NameExtension:
    OWN_NAME = "http://hl7.org/fhir/StructureDefinition/humanname-own-name"
    ADDITION = "http://fhir.de/StructureDefinition/humanname-namenszusatz"
    PARTICLE = "http://hl7.org/fhir/StructureDefinition/humanname-own-prefix"
    QUALIFIER = "http://hl7.org/fhir/StructureDefinition/iso21090-EN-qualifier"


class AddressExtension:
    STREET = "http://hl7.org/fhir/StructureDefinition/iso21090-ADXP-streetName"
    HOUSE_NUMBER = "http://hl7.org/fhir/StructureDefinition/iso21090-ADXP-houseNumber"
    ADDITIONAL_LOCATOR = "http://hl7.org/fhir/StructureDefinition/iso21090-ADXP-additionalLocator"
    POST_OFFICE_BOX = "http://hl7.org/fhir/StructureDefinition/iso21090-ADXP-postBox"
    DISTRICT = "http://hl7.org/fhir/StructureDefinition/iso21090-ADXP-precinct"


class PatientExtension:
    RELIGION = "https://fhir.kbv.de/StructureDefinition/KBV_EX_MIO_ULB_Religion"
    INTERPRETER_REQUIRED = "https://fhir.kbv.de/StructureDefinition/KBV_EX_MIO_ULB_Interpreter_Required"
    COMMUNICATION_NOTES = "https://fhir.kbv.de/StructureDefinition/KBV_EX_MIO_ULB_Notes_For_Communication"


GENDER_EXTENSION = "http://fhir.de/StructureDefinition/gender-amtlich-de"
ADDITIONAL_COMMENT_EXTENSION = "https://fhir.kbv.de/StructureDefinition/KBV_EX_Base_Additional_Comment"


class ValueSetUrl:
    COUNTRY = "https://fhir.kbv.de/ValueSet/KBV_VS_Base_Deuev_Anlage_8"
    CONTACT_POINT_SYSTEM = "http://hl7.org/fhir/ValueSet/contact-point-system"
    RELATIONSHIP_TYPE = "http://hl7.org/fhir/ValueSet/relatedperson-relationshiptype"
    ADMINISTRATIVE_GENDER = "http://hl7.org/fhir/ValueSet/administrative-gender"
    GENDER_OTHER = "http://fhir.de/ValueSet/gender-other-de"
    QUALIFICATION = "https://fhir.kbv.de/ValueSet/KBV_VS_Base_Practitioner_Speciality"
    ROLE_CARE = "https://fhir.kbv.de/ValueSet/KBV_VS_Base_Rolecare"
    SPECIALTY = "https://fhir.kbv.de/ValueSet/KBV_VS_SFHIR_BAR2_ARZTNRFACHGRUPPE"
    FACILITY_TYPE = "https://fhir.kbv.de/ValueSet/KBV_VS_MIO_ULB_Type_Of_Facility"
