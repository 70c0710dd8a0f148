"""Markup to text, entity extractors and CNPJ disambiguation."""
