"""
GPT-4o client for reinterpreting node prompts into numeric opinions.
"""

import json
import re
from typing import Dict, Any

from openai import OpenAI

from scene_graph.schema import CodifiedOpinion


OPINION_KEYS = ("style", "mood", "quality", "parameters")


class GPT4oClient:
    """
    Client for turning a node's text prompts into a CodifiedOpinion.
    
    - Input: positive, negative and free-text opinion prompts
    - Output: style/mood/quality weights and named rendering parameters
    """
    
    def __init__(self, api_key: str, model: str = "gpt-4o", max_tokens: int = 500):
        """
        Initialize the GPT-4o client.
        
        Args:
            api_key: OpenAI API key
            model: Model name (default: gpt-4o)
            max_tokens: Maximum tokens for the response
        """
        self.client = OpenAI(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens
    
    def _build_prompt(self, positive_prompt: str, negative_prompt: str, opinion_prompt: str) -> str:
        return f"""Reinterpret the following prompts describing an object in a scene.

Positive prompt: "{positive_prompt}"
Negative prompt: "{negative_prompt}"
Opinion: "{opinion_prompt}"

The output should be formatted as a valid JSON object with the following structure:
{{
  "style": [0.5, 0.3, 0.2],
  "mood": [0.4, 0.6, 0.0],
  "quality": [0.8, 0.1, 0.1],
  "parameters": {{"saturation": 0.7, "contrast": 0.6, "brightness": 0.5}}
}}

IMPORTANT:
- All values must be numbers between 0 and 1
- Provide ONLY the JSON object, no additional text"""
    
    def reinterpret_prompts(
        self,
        positive_prompt: str,
        negative_prompt: str,
        opinion_prompt: str
    ) -> CodifiedOpinion:
        """
        Codify a node's prompts into numeric weights using GPT-4o.
        
        Args:
            positive_prompt: What the object is ("A cup in the scene")
            negative_prompt: What it is not ("No cup in the scene")
            opinion_prompt: Free-text opinion about how it should look
        
        Returns:
            CodifiedOpinion parsed from the model response
        
        Raises:
            ValueError: If GPT-4o returns invalid JSON
            RuntimeError: If the API call fails
        """
        prompt = self._build_prompt(positive_prompt, negative_prompt, opinion_prompt)
        
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens
            )
        except Exception as e:
            raise RuntimeError(f"GPT-4o API call failed: {str(e)}") from e
        
        response_text = response.choices[0].message.content or ""
        data = self._parse_response(response_text)
        try:
            return CodifiedOpinion.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"GPT-4o response has non-numeric opinion values: {str(e)}\n\nResponse: {response_text}") from e
    
    def _parse_response(self, response_text: str) -> Dict[str, Any]:
        """
        Parse GPT-4o response and extract JSON.
        
        Handles JSON wrapped in markdown code blocks and trailing commas.
        
        Raises:
            ValueError: If JSON cannot be parsed or keys are missing
        """
        json_match = re.search(r'```(?:json)?\s*(\{.*?\})\s*```', response_text, re.DOTALL)
        if json_match:
            response_text = json_match.group(1)
        
        response_text = response_text.strip()
        
        try:
            data = json.loads(response_text)
        except json.JSONDecodeError as e:
            cleaned_text = re.sub(r',(\s*[}\]])', r'\1', response_text)
            try:
                data = json.loads(cleaned_text)
            except json.JSONDecodeError:
                raise ValueError(f"Failed to parse GPT-4o response as JSON: {str(e)}\n\nResponse: {response_text}")
        
        if not self.validate_opinion(data):
            raise ValueError(f"GPT-4o response is missing opinion fields: {response_text}")
        return data
    
    def validate_opinion(self, data: Any) -> bool:
        """
        Validate that the opinion has the expected structure.
        
        Returns:
            True if valid, False otherwise
        """
        if not isinstance(data, dict):
            return False
        for key in OPINION_KEYS:
            if key not in data:
                return False
        for key in ("style", "mood", "quality"):
            if not isinstance(data[key], list):
                return False
        return isinstance(data["parameters"], dict)
