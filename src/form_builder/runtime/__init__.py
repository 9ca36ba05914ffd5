"""Client runtime: renderer dispatch, schema files and the Streamlit app."""
